from django.urls import path

from . import views

app_name = "account"

urlpatterns = [
    path("", views.CustomerDashboardView.as_view(), name="dashboard"),
    path("profile/", views.ProfileView.as_view(), name="profile"),
    path("profile/edit/", views.ProfileEditView.as_view(), name="profile-edit"),
    path("profile/picture/delete/", views.ProfilePictureDeleteView.as_view(), name="profile-picture-delete"),
    path("password/", views.PasswordChangeView.as_view(), name="password"),
    path("settings/", views.SettingsView.as_view(), name="settings"),
    path("deactivate/", views.DeactivateAccountView.as_view(), name="deactivate"),
    path("delete/", views.DeleteAccountView.as_view(), name="delete"),
    path("addresses/", views.AddressListView.as_view(), name="address-list"),
    path("addresses/<int:pk>/", views.AddressDetailView.as_view(), name="address-detail"),
    path("addresses/<int:pk>/default/", views.AddressSetDefaultView.as_view(), name="address-default"),
]
