"""
Serializers for license API endpoints.
"""

from rest_framework import serializers


class CreateLicenceRequestSerializer(serializers.Serializer):
    """Serializer for create licence request."""

    customer_name = serializers.CharField(max_length=255)
    site_name = serializers.CharField(max_length=255)
    device_count = serializers.IntegerField(min_value=1)
    validity = serializers.IntegerField(min_value=1, help_text="Validity in months")
    email = serializers.EmailField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    file_url = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=500
    )


class LicenceKeyQuerySerializer(serializers.Serializer):
    """Serializer for the key pair passed as query parameters."""

    customer_name = serializers.CharField(max_length=255)
    system_id = serializers.CharField(max_length=100)


class UpdateLicenceRequestSerializer(serializers.Serializer):
    """Serializer for update licence request; every field is optional."""

    site_name = serializers.CharField(required=False, max_length=255)
    device_count = serializers.IntegerField(required=False, min_value=1)
    validity = serializers.IntegerField(required=False, min_value=1)
    email = serializers.EmailField(required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    file_url = serializers.CharField(required=False, allow_blank=True, max_length=500)


class ActivateLicenceRequestSerializer(serializers.Serializer):
    """Serializer for activate licence request."""

    system_id = serializers.CharField(max_length=100)
    password = serializers.CharField(trim_whitespace=False)
    fe_mac = serializers.CharField(required=False, allow_blank=True, default="", max_length=64)
    be_mac = serializers.CharField(required=False, allow_blank=True, default="", max_length=64)


class LicenceDataSerializer(serializers.Serializer):
    """Serializer for a stored licence."""

    customer_name = serializers.CharField()
    system_id = serializers.CharField()
    site_name = serializers.CharField()
    device_count = serializers.IntegerField()
    validity = serializers.IntegerField()
    email = serializers.EmailField()
    password = serializers.CharField(required=False)
    generated_date = serializers.DateField()
    activated_date = serializers.DateField(allow_null=True)
    state = serializers.IntegerField()
    description = serializers.CharField(allow_blank=True)
    file_url = serializers.CharField(allow_blank=True)
    fe_mac = serializers.CharField(allow_blank=True)
    be_mac = serializers.CharField(allow_blank=True)


class EncryptedPayloadSerializer(serializers.Serializer):
    """Serializer for the verbose sealed payload."""

    algorithm = serializers.CharField()
    kdf = serializers.CharField()
    iterations = serializers.IntegerField()
    digest = serializers.CharField()
    iv = serializers.CharField()
    salt = serializers.CharField()
    tag = serializers.CharField()
    ciphertext = serializers.CharField()


class CreateLicenceResponseSerializer(serializers.Serializer):
    """Serializer for create licence response."""

    message = serializers.CharField()
    license_data = LicenceDataSerializer()
    encrypted_payload = EncryptedPayloadSerializer()
    sealed_payload = serializers.CharField()


class UpdateLicenceResponseSerializer(serializers.Serializer):
    """Serializer for update licence response."""

    message = serializers.CharField()
    license_data = LicenceDataSerializer()


class LicenceListResponseSerializer(serializers.Serializer):
    """Serializer for licence list response."""

    message = serializers.CharField()
    licenses = LicenceDataSerializer(many=True)


class TopCustomerSerializer(serializers.Serializer):
    """Serializer for one entry of the top customers list."""

    customer = serializers.CharField()
    count = serializers.IntegerField()


class LicenceStatisticsSerializer(serializers.Serializer):
    """Serializer for dashboard statistics."""

    totalLicenses = serializers.IntegerField()
    activeLicenses = serializers.IntegerField()
    inactiveLicenses = serializers.IntegerField()
    expiredLicenses = serializers.IntegerField()
    activatedLast30Days = serializers.IntegerField()
    top5Customers = TopCustomerSerializer(many=True)
    totalCustomers = serializers.IntegerField()


class LicenceInfoResponseSerializer(serializers.Serializer):
    """Serializer for licence info response."""

    message = serializers.CharField()
    lic_info = LicenceStatisticsSerializer()


class ActivationSerializer(serializers.Serializer):
    """Serializer for the activation projection."""

    customer_name = serializers.CharField()
    system_id = serializers.CharField()
    site_name = serializers.CharField()
    device_count = serializers.IntegerField()
    description = serializers.CharField(allow_blank=True)
    file_url = serializers.CharField(allow_blank=True)
    fe_mac = serializers.CharField(allow_blank=True)
    be_mac = serializers.CharField(allow_blank=True)
    valid_till = serializers.DateField()


class ActivateLicenceResponseSerializer(serializers.Serializer):
    """Serializer for activate licence response."""

    message = serializers.CharField()
    activation_res = ActivationSerializer()


class MessageResponseSerializer(serializers.Serializer):
    """Serializer for a plain message response."""

    message = serializers.CharField()
