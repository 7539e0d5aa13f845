from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import serializers

from .models import Vendor, VendorMember, VendorStatus


class VendorSerializer(serializers.ModelSerializer):
    owner = serializers.PrimaryKeyRelatedField(read_only=True)
    slug = serializers.SlugField(required=False, allow_blank=True)

    class Meta:
        model = Vendor
        fields = [
            "id",
            "name",
            "slug",
            "owner",
            "email",
            "phone",
            "description",
            "commission_pct",
            "status",
            "created_at",
            "updated_at",
        ]
        # status and commission change through dedicated admin actions
        read_only_fields = ["id", "owner", "commission_pct", "status", "created_at", "updated_at"]

    def validate_slug(self, value: str) -> str:
        value = (value or "").strip()
        if value:
            qs = Vendor.objects.filter(slug=value)
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError("A vendor with this slug already exists.")
        return value


class VendorStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=VendorStatus.choices)


class VendorCommissionSerializer(serializers.Serializer):
    commission_pct = serializers.DecimalField(
        max_digits=6, decimal_places=2, allow_null=True, required=True
    )


class MemberSerializer(serializers.ModelSerializer):
    user_email = serializers.SerializerMethodField()
    user_username = serializers.SerializerMethodField()

    class Meta:
        model = VendorMember
        fields = [
            "id",
            "vendor",
            "user",
            "role",
            "is_active",
            "created_at",
            "user_email",
            "user_username",
        ]
        read_only_fields = ["id", "created_at", "vendor"]

    def get_user_email(self, obj):
        return getattr(obj.user, "email", None)

    def get_user_username(self, obj):
        return getattr(obj.user, "username", None)


class InviteSerializer(serializers.Serializer):
    user_id = serializers.IntegerField(required=False)
    email = serializers.EmailField(required=False)
    role = serializers.ChoiceField(
        choices=[("STAFF", "Staff"), ("MANAGER", "Manager")],
        default="STAFF",
    )

    def validate(self, attrs):
        User = get_user_model()
        user = None
        if attrs.get("user_id"):
            user = User.objects.filter(pk=attrs["user_id"]).first()
            if not user:
                raise serializers.ValidationError({"user_id": "User not found"})
        elif attrs.get("email"):
            user = User.objects.filter(email__iexact=attrs["email"]).first()
            if not user:
                raise serializers.ValidationError({"email": "User not found"})
        else:
            raise serializers.ValidationError({"user": "Provide user_id or email"})
        vendor = self.context.get("vendor")
        if vendor is not None and user.pk == vendor.owner_id:
            raise serializers.ValidationError({"user": "The vendor owner is already a member."})
        attrs["_user"] = user
        return attrs

    def create(self, validated_data):
        vendor: Vendor = self.context["vendor"]
        return vendor.add_member(validated_data["_user"], validated_data["role"])
