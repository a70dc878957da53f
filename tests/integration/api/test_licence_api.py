"""
Integration tests for license API endpoints.
"""
from smtplib import SMTPException
from unittest import mock

import pytest
from django.urls import reverse

from licenses.domain.payload_sealer import PayloadSealer
from licenses.infrastructure.models import License, NotificationDeadLetter
from licenses.tasks import deliver_license_credentials_task

CREATE_BODY = {
    "customer_name": "Acme",
    "site_name": "North",
    "device_count": 5,
    "validity": 3,
    "email": "ops@acme.example",
    "description": "Main plant",
}


def _create(api_client, **overrides):
    body = dict(CREATE_BODY, **overrides)
    return api_client.post(reverse("licences:create-licence"), body, format="json")


def _key_url(name, customer_name, system_id):
    return f"{reverse(name)}?customer_name={customer_name}&system_id={system_id}"


@pytest.mark.django_db
@pytest.mark.integration
class TestCreateLicenceAPI:
    """Integration tests for createLicence."""

    def test_create_success(self, api_client, mailoutbox, settings):
        """Test a license is created, sealed and emailed."""
        response = _create(api_client)

        assert response.status_code == 200
        data = response.json()
        assert data["message"].startswith("License created successfully")
        license_data = data["license_data"]
        assert license_data["system_id"].startswith("CFS30_ACM_NOCS1_")
        assert license_data["state"] == 0

        sealer = PayloadSealer(iterations=settings.LICENSING["SEAL_ITERATIONS"])
        opened = sealer.unseal(data["sealed_payload"], license_data["password"])
        assert opened["customer_name"] == "Acme"
        assert sealer.unseal(data["encrypted_payload"], license_data["password"]) == opened

        assert License.objects.filter(system_id=license_data["system_id"]).exists()

        assert len(mailoutbox) == 1
        message = mailoutbox[0]
        assert message.to == ["ops@acme.example"]
        assert "License Activation Credentials" in message.subject
        assert license_data["password"] in message.body
        filename, content, mimetype = message.attachments[0]
        assert filename == f"license-{license_data['system_id']}.pdf"
        assert mimetype == "application/pdf"
        assert content[:4] == b"%PDF"

    def test_similar_license_conflict(self, api_client):
        """Test the same terms for the same customer are refused."""
        assert _create(api_client).status_code == 200

        response = _create(api_client, description="Another")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "SIMILAR_LICENSE_EXISTS"
        assert License.objects.count() == 1

    def test_validation_error(self, api_client):
        """Test invalid input is rejected with details."""
        response = _create(api_client, email="not-an-email", device_count=0)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert "email" in error["details"]
        assert License.objects.count() == 0


@pytest.mark.django_db
@pytest.mark.integration
class TestLicenceLifecycleAPI:
    """Integration tests for update, delete, list, statistics and activation."""

    def test_update_rotates_password(self, api_client, mailoutbox):
        """Test updating sends new credentials."""
        created = _create(api_client).json()["license_data"]

        response = api_client.put(
            _key_url("licences:update-licence", "Acme", created["system_id"]),
            {"device_count": 10},
            format="json",
        )

        assert response.status_code == 200
        updated = response.json()["license_data"]
        assert updated["device_count"] == 10
        assert updated["password"] != created["password"]
        assert len(mailoutbox) == 2
        assert updated["password"] in mailoutbox[1].body

    def test_update_missing(self, api_client):
        """Test updating an unknown license."""
        response = api_client.put(
            _key_url("licences:update-licence", "Acme", "NOPE"), {"device_count": 2}, format="json"
        )
        assert response.status_code == 404

    def test_update_requires_key(self, api_client):
        """Test the key pair is required."""
        response = api_client.put(reverse("licences:update-licence"), {}, format="json")
        assert response.status_code == 400

    def test_delete(self, api_client):
        """Test deleting twice."""
        created = _create(api_client).json()["license_data"]
        url = _key_url("licences:delete-licence", "Acme", created["system_id"])

        assert api_client.delete(url).status_code == 200
        response = api_client.delete(url)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LICENSE_NOT_FOUND"

    def test_list_hides_passwords(self, api_client):
        """Test listing licenses."""
        _create(api_client)
        _create(api_client, customer_name="Globex")

        response = api_client.get(reverse("licences:all-licences"))

        assert response.status_code == 200
        licenses = response.json()["licenses"]
        assert len(licenses) == 2
        assert all("password" not in item for item in licenses)

    def test_statistics(self, api_client):
        """Test dashboard statistics."""
        _create(api_client)

        response = api_client.get(reverse("licences:licence-info"))

        assert response.status_code == 200
        lic_info = response.json()["lic_info"]
        assert lic_info["totalLicenses"] == 1
        assert lic_info["inactiveLicenses"] == 1

    def test_activate(self, api_client):
        """Test activation, re-activation and a wrong password."""
        created = _create(api_client).json()["license_data"]
        url = reverse("licences:activate-licence")
        body = {
            "system_id": created["system_id"],
            "password": created["password"],
            "fe_mac": "00:1A",
        }

        wrong = api_client.post(url, dict(body, password="guess"), format="json")
        assert wrong.status_code == 401

        first = api_client.post(url, body, format="json")
        assert first.status_code == 200
        activation = first.json()["activation_res"]
        assert activation["valid_till"] is not None
        assert "password" not in activation

        second = api_client.post(url, body, format="json")
        assert second.status_code == 200
        assert second.json()["activation_res"] == activation
        assert License.objects.get(system_id=created["system_id"]).state == 1


@pytest.mark.django_db
@pytest.mark.integration
class TestCredentialDelivery:
    """Integration tests for the credential delivery task."""

    def test_failed_delivery_is_dead_lettered(self):
        """Test exhausted retries leave a dead letter and no exception."""
        license_data = {
            "customer_name": "Acme",
            "system_id": "CFS30_ACM_NOCS1_0520245",
            "email": "ops@acme.example",
            "password": "secret",
        }
        with mock.patch(
            "licenses.tasks.deliver_license_credentials", side_effect=SMTPException("relay down")
        ) as deliver:
            deliver_license_credentials_task.apply(args=(license_data, "created"))

        assert deliver.call_count == 4
        letter = NotificationDeadLetter.objects.get()
        assert letter.system_id == "CFS30_ACM_NOCS1_0520245"
        assert letter.attempts == 4
        assert "relay down" in letter.error

    def test_create_survives_broker_outage(self, api_client):
        """Test creation succeeds when the notification cannot be queued."""
        with mock.patch(
            "licenses.infrastructure.notifier.CeleryLicenseNotifier.notify",
            side_effect=ConnectionError("broker down"),
        ):
            response = _create(api_client)

        assert response.status_code == 200
        assert License.objects.count() == 1
