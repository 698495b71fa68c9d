from django.urls import path

from . import views

app_name = "promotions"

urlpatterns = [
    path("", views.FlashSaleListView.as_view(), name="flash-sale-list"),
    path("<int:pk>/", views.FlashSaleDetailView.as_view(), name="flash-sale-detail"),
]
