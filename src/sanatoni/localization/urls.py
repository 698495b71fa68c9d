from django.urls import path

from . import views

app_name = "localization"

urlpatterns = [
    path("switch/", views.SwitchLanguageView.as_view(), name="switch"),
    path("available/", views.available_languages, name="available"),
    path("settings/", views.LanguageSettingsView.as_view(), name="settings"),
]
