"""URL configuration for Sanatoni Mart."""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from sanatoni.catalog.views import HomeView
from sanatoni.core.views import DashboardRedirectView, LoginView, LogoutView, RegisterView, health_check

urlpatterns = [
    # Health check
    path("health/", health_check, name="health_check"),

    # Django admin
    path("django-admin/", admin.site.urls),

    # Authentication
    path("login/", LoginView.as_view(), name="login"),
    path("register/", RegisterView.as_view(), name="register"),
    path("logout/", LogoutView.as_view(), name="logout"),
    path("dashboard/", DashboardRedirectView.as_view(), name="dashboard"),

    # Back office (admins and managers)
    path("admin/", include("sanatoni.backoffice.urls", namespace="backoffice")),

    # Customer account
    path("account/", include("sanatoni.account.urls", namespace="account")),

    # Cart, checkout, orders and wishlist
    path("", include("sanatoni.store.urls", namespace="store")),

    # Flash sales
    path("flash-sales/", include("sanatoni.promotions.urls", namespace="promotions")),

    # Product reviews and newsletter
    path("", include("sanatoni.reviews.urls", namespace="reviews")),
    path("newsletter/", include("sanatoni.newsletter.urls", namespace="newsletter")),

    # Language switching
    path("language/", include("sanatoni.localization.urls", namespace="localization")),

    # Blog, pages and sitemap
    path("", include("sanatoni.content.urls", namespace="content")),

    # Storefront catalog
    path("", HomeView.as_view(), name="home"),
    path("", include("sanatoni.catalog.urls", namespace="catalog")),
]

# Serve media files in development
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
