"""
License API views.

These endpoints are used by the operator console and by installations to:
- Create, update and delete licenses
- List licenses and read dashboard statistics
- Activate a license with its emailed credentials
"""

from asgiref.sync import async_to_sync
from django.conf import settings
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from api.exceptions import error_body
from api.licences.serializers import (
    ActivateLicenceRequestSerializer,
    ActivateLicenceResponseSerializer,
    CreateLicenceRequestSerializer,
    CreateLicenceResponseSerializer,
    LicenceInfoResponseSerializer,
    LicenceKeyQuerySerializer,
    LicenceListResponseSerializer,
    MessageResponseSerializer,
    UpdateLicenceRequestSerializer,
    UpdateLicenceResponseSerializer,
)
from core.infrastructure.cache_adapters import cache_adapter
from core.instrumentation import Status, StatusCode, get_tracer
from licenses.application.commands.activate_license import ActivateLicenseCommand
from licenses.application.commands.create_license import CreateLicenseCommand
from licenses.application.commands.delete_license import DeleteLicenseCommand
from licenses.application.commands.update_license import UpdateLicenseCommand
from licenses.application.handlers.create_license_handler import CreateLicenseHandler
from licenses.application.handlers.license_lifecycle_handlers import (
    ActivateLicenseHandler,
    DeleteLicenseHandler,
    UpdateLicenseHandler,
)
from licenses.application.handlers.license_query_handlers import (
    GetLicenseStatisticsHandler,
    ListLicensesHandler,
)
from licenses.application.queries.get_license_statistics import GetLicenseStatisticsQuery
from licenses.application.queries.list_licenses import ListLicensesQuery
from licenses.application.services.duplicate_guard import DuplicateGuard
from licenses.domain.payload_sealer import PayloadSealer
from licenses.domain.services import PasswordGenerator, SystemIdFormatter
from licenses.infrastructure.notifier import CeleryLicenseNotifier
from licenses.infrastructure.repositories.django_license_store import DjangoLicenseStore

# Initialize collaborators (in production, use DI container)
_license_store = DjangoLicenseStore()
_notifier = CeleryLicenseNotifier()

tracer = get_tracer(__name__)

KEY_PARAMETERS = [
    OpenApiParameter("customer_name", str, OpenApiParameter.QUERY, required=True),
    OpenApiParameter("system_id", str, OpenApiParameter.QUERY, required=True),
]


def _licensing(name, default):
    return getattr(settings, "LICENSING", {}).get(name, default)


def _password_generator() -> PasswordGenerator:
    return PasswordGenerator(length=_licensing("PASSWORD_LENGTH", 12))


def _validation_failed(span, errors) -> Response:
    span.set_attribute("error", "validation_failed")
    span.set_attribute("error.details", str(errors))
    span.set_status(Status(StatusCode.ERROR, "Validation failed"))
    return Response(
        error_body("VALIDATION_ERROR", "Invalid input. Please check your fields.", errors),
        status=status.HTTP_400_BAD_REQUEST,
    )


class CreateLicenceView(APIView):
    """View for creating licenses."""

    @extend_schema(
        operation_id="create_licence",
        summary="Create Licence",
        description=(
            "Issue a license to a customer. The activation credentials are emailed "
            "to the customer; the response carries the record and the payload sealed "
            "with the activation password."
        ),
        tags=["Licences"],
        request=CreateLicenceRequestSerializer,
        responses={
            200: CreateLicenceResponseSerializer,
            400: {"description": "Bad Request"},
            409: {"description": "Similar or duplicate license request"},
        },
    )
    def post(self, request: Request) -> Response:
        """Create a license."""
        return async_to_sync(self._handle_create_licence)(request)

    async def _handle_create_licence(self, request: Request) -> Response:
        """Async handler for create licence."""
        with tracer.start_as_current_span("create_licence") as span:
            span.set_attribute("operation", "create_licence")

            serializer = CreateLicenceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("customer_name", data["customer_name"])
            span.set_attribute("device_count", data["device_count"])

            handler = CreateLicenseHandler(
                license_store=_license_store,
                notifier=_notifier,
                duplicate_guard=DuplicateGuard(
                    cache_adapter, window_seconds=_licensing("DUPLICATE_WINDOW_SECONDS", 10)
                ),
                sealer=PayloadSealer(iterations=_licensing("SEAL_ITERATIONS", 150000)),
                password_generator=_password_generator(),
                system_id_formatter=SystemIdFormatter(_licensing("SYSTEM_ID_PREFIX", "CFS30")),
            )

            command = CreateLicenseCommand(
                customer_name=data["customer_name"],
                site_name=data["site_name"],
                device_count=data["device_count"],
                validity=data["validity"],
                email=data["email"],
                description=data.get("description", ""),
                file_url=data.get("file_url", ""),
            )

            result = await handler.handle(command)

            span.set_attribute("system_id", result.license_data["system_id"])
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "message": (
                        "License created successfully. An email with credentials has been sent."
                    ),
                    "license_data": result.license_data,
                    "encrypted_payload": result.encrypted_payload,
                    "sealed_payload": result.sealed_payload,
                },
                status=status.HTTP_200_OK,
            )


class UpdateLicenceView(APIView):
    """View for updating licenses."""

    @extend_schema(
        operation_id="update_licence",
        summary="Update Licence",
        description=(
            "Patch a license. The activation password is always rotated and the new "
            "credentials are emailed."
        ),
        tags=["Licences"],
        parameters=KEY_PARAMETERS,
        request=UpdateLicenceRequestSerializer,
        responses={
            200: UpdateLicenceResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def put(self, request: Request) -> Response:
        """Update a license."""
        return async_to_sync(self._handle_update_licence)(request)

    async def _handle_update_licence(self, request: Request) -> Response:
        """Async handler for update licence."""
        with tracer.start_as_current_span("update_licence") as span:
            span.set_attribute("operation", "update_licence")

            key_serializer = LicenceKeyQuerySerializer(data=request.query_params)
            if not key_serializer.is_valid():
                return _validation_failed(span, key_serializer.errors)

            serializer = UpdateLicenceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            key = key_serializer.validated_data
            span.set_attribute("system_id", key["system_id"])

            handler = UpdateLicenseHandler(
                license_store=_license_store,
                notifier=_notifier,
                password_generator=_password_generator(),
            )
            updated = await handler.handle(
                UpdateLicenseCommand(
                    customer_name=key["customer_name"],
                    system_id=key["system_id"],
                    changes=dict(serializer.validated_data),
                )
            )

            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "message": (
                        "License updated successfully. "
                        "New credentials have been sent to your email."
                    ),
                    "license_data": updated.to_dict(),
                },
                status=status.HTTP_200_OK,
            )


class DeleteLicenceView(APIView):
    """View for deleting licenses."""

    @extend_schema(
        operation_id="delete_licence",
        summary="Delete Licence",
        tags=["Licences"],
        parameters=KEY_PARAMETERS,
        responses={
            200: MessageResponseSerializer,
            400: {"description": "Bad Request"},
            404: {"description": "License not found"},
        },
    )
    def delete(self, request: Request) -> Response:
        """Delete a license."""
        return async_to_sync(self._handle_delete_licence)(request)

    async def _handle_delete_licence(self, request: Request) -> Response:
        """Async handler for delete licence."""
        with tracer.start_as_current_span("delete_licence") as span:
            span.set_attribute("operation", "delete_licence")

            key_serializer = LicenceKeyQuerySerializer(data=request.query_params)
            if not key_serializer.is_valid():
                return _validation_failed(span, key_serializer.errors)

            key = key_serializer.validated_data
            span.set_attribute("system_id", key["system_id"])

            await DeleteLicenseHandler(license_store=_license_store).handle(
                DeleteLicenseCommand(customer_name=key["customer_name"], system_id=key["system_id"])
            )

            span.set_status(Status(StatusCode.OK))
            return Response({"message": "License deleted successfully."}, status=status.HTTP_200_OK)


class LicenceInfoView(APIView):
    """View for dashboard statistics."""

    @extend_schema(
        operation_id="get_licence_info",
        summary="Licence Statistics",
        description="Counts of total, active, inactive, expired and recently activated licenses.",
        tags=["Licences"],
        responses={200: LicenceInfoResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """Return license statistics."""
        return async_to_sync(self._handle_licence_info)(request)

    async def _handle_licence_info(self, request: Request) -> Response:
        """Async handler for licence info."""
        with tracer.start_as_current_span("get_licence_info") as span:
            lic_info = await GetLicenseStatisticsHandler(license_store=_license_store).handle(
                GetLicenseStatisticsQuery()
            )
            span.set_attribute("licenses.count", lic_info["totalLicenses"])
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "message": "License information retrieved successfully.",
                    "lic_info": lic_info,
                },
                status=status.HTTP_200_OK,
            )


class LicenceListView(APIView):
    """View for listing licenses."""

    @extend_schema(
        operation_id="get_all_licenses",
        summary="List Licences",
        description="Every license, without activation passwords.",
        tags=["Licences"],
        responses={200: LicenceListResponseSerializer},
    )
    def get(self, request: Request) -> Response:
        """Return every license."""
        return async_to_sync(self._handle_list_licences)(request)

    async def _handle_list_licences(self, request: Request) -> Response:
        """Async handler for licence list."""
        with tracer.start_as_current_span("get_all_licenses") as span:
            licenses = await ListLicensesHandler(license_store=_license_store).handle(
                ListLicensesQuery()
            )
            span.set_attribute("licenses.count", len(licenses))
            span.set_status(Status(StatusCode.OK))
            return Response(
                {"message": "All licenses retrieved successfully.", "licenses": licenses},
                status=status.HTTP_200_OK,
            )


class ActivateLicenceView(APIView):
    """View for activating licenses."""

    @extend_schema(
        operation_id="activate_licence",
        summary="Activate Licence",
        description=(
            "Activate a license with the system ID and password from the credentials "
            "email. Activating an active license returns the same result again."
        ),
        tags=["Licences"],
        request=ActivateLicenceRequestSerializer,
        responses={
            200: ActivateLicenceResponseSerializer,
            400: {"description": "Bad Request"},
            401: {"description": "Invalid password"},
            404: {"description": "License not found"},
        },
    )
    def post(self, request: Request) -> Response:
        """Activate a license."""
        return async_to_sync(self._handle_activate_licence)(request)

    async def _handle_activate_licence(self, request: Request) -> Response:
        """Async handler for activate licence."""
        with tracer.start_as_current_span("activate_licence") as span:
            span.set_attribute("operation", "activate_licence")

            serializer = ActivateLicenceRequestSerializer(data=request.data)
            if not serializer.is_valid():
                return _validation_failed(span, serializer.errors)

            data = serializer.validated_data
            span.set_attribute("system_id", data["system_id"])

            result = await ActivateLicenseHandler(license_store=_license_store).handle(
                ActivateLicenseCommand(
                    system_id=data["system_id"],
                    password=data["password"],
                    fe_mac=data.get("fe_mac", ""),
                    be_mac=data.get("be_mac", ""),
                )
            )

            span.set_attribute("already_active", result.already_active)
            span.set_status(Status(StatusCode.OK))
            return Response(
                {
                    "message": "License activated successfully.",
                    "activation_res": result.activation_res,
                },
                status=status.HTTP_200_OK,
            )
