"""
URL configuration for authentication API endpoints.
"""

from django.urls import path

from api.accounts import views

app_name = "accounts"

urlpatterns = [
    path("signin", views.SignInView.as_view(), name="signin"),
    path("renewToken", views.RenewTokenView.as_view(), name="renew-token"),
    path("logout", views.LogoutView.as_view(), name="logout"),
    path("changePassword", views.ChangePasswordView.as_view(), name="change-password"),
]
