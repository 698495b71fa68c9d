"""Settings package. Select a module with DJANGO_SETTINGS_MODULE."""
