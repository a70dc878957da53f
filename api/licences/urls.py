"""
URL configuration for license API endpoints.
"""

from django.urls import path

from api.licences import views

app_name = "licences"

urlpatterns = [
    path("createLicence", views.CreateLicenceView.as_view(), name="create-licence"),
    path("updateLicence", views.UpdateLicenceView.as_view(), name="update-licence"),
    path("deleteLicence", views.DeleteLicenceView.as_view(), name="delete-licence"),
    path("getLicenceInfo", views.LicenceInfoView.as_view(), name="licence-info"),
    path("getAllLicenses", views.LicenceListView.as_view(), name="all-licences"),
    path("activateLicence", views.ActivateLicenceView.as_view(), name="activate-licence"),
]
