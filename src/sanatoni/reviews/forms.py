"""Review submission, voting and listing forms."""

from django import forms

from .models import MAX_RATING, MIN_RATING
from .services import SORTS


class ReviewForm(forms.Form):
    rating = forms.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING)
    title = forms.CharField(max_length=255, required=False)
    comment = forms.CharField(min_length=10, max_length=2000)


class VoteForm(forms.Form):
    is_helpful = forms.NullBooleanField()

    def clean_is_helpful(self):
        value = self.cleaned_data.get("is_helpful")
        if value is None:
            raise forms.ValidationError("The is helpful field is required.")
        return value


class ReviewListForm(forms.Form):
    rating = forms.IntegerField(min_value=MIN_RATING, max_value=MAX_RATING, required=False)
    sort = forms.ChoiceField(choices=[(key, key) for key in SORTS], required=False)
    per_page = forms.IntegerField(min_value=1, max_value=50, required=False)
