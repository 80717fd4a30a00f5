from django.urls import path
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from .views import RegisterView, ProfileView

urlpatterns = [
    path("login/",    TokenObtainPairView.as_view(), name="auth-login"),
    path("refresh/",  TokenRefreshView.as_view(),    name="auth-refresh"),
    path("register/", RegisterView.as_view(),        name="auth-register"),
    path("me/",       ProfileView.as_view(),         name="auth-me"),
]
