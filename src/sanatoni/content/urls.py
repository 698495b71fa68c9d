from django.urls import path

from . import views

app_name = "content"

urlpatterns = [
    path("sitemap.xml", views.sitemap, name="sitemap"),
    path("blog/", views.BlogIndexView.as_view(), name="blog-index"),
    path("blog/category/<slug:slug>/", views.BlogCategoryView.as_view(), name="blog-category"),
    path("blog/tag/<slug:slug>/", views.BlogTagView.as_view(), name="blog-tag"),
    path("blog/<slug:slug>/", views.BlogPostView.as_view(), name="post-detail"),
    path("pages/<slug:slug>/", views.PageView.as_view(), name="page-detail"),
]
