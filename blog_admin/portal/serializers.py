from rest_framework import serializers

from .changes import ChangeCategory, InvalidChange, validate_payload


class CategoryPayloadField(serializers.JSONField):
    """JSON object checked against the schema of one change category."""

    def __init__(self, category, **kwargs):
        self.category = ChangeCategory(category)
        super().__init__(**kwargs)

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        try:
            validate_payload(self.category, value)
        except InvalidChange as e:
            raise serializers.ValidationError(str(e))
        return value


class HomepageConfigRequestSerializer(serializers.Serializer):
    config = CategoryPayloadField(ChangeCategory.HOMEPAGE)


class SiteSettingsRequestSerializer(serializers.Serializer):
    settings = CategoryPayloadField(ChangeCategory.SETTINGS)


class PendingChangeSerializer(serializers.Serializer):
    id = serializers.CharField(required=False, allow_blank=True)
    category = serializers.ChoiceField(choices=[c.value for c in ChangeCategory])
    description = serializers.CharField(allow_blank=True, trim_whitespace=True)
    payload = serializers.JSONField()
    originalPayload = serializers.JSONField(required=False, allow_null=True)
    createdAt = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        category = ChangeCategory(attrs["category"])
        errors = {}
        for key in ("payload", "originalPayload"):
            value = attrs.get(key)
            if value is None and key == "originalPayload":
                continue
            try:
                validate_payload(category, value)
            except InvalidChange as e:
                errors[key] = [str(e)]
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class BatchDeploySerializer(serializers.Serializer):
    changes = PendingChangeSerializer(many=True, allow_empty=False)


class ManualCommitSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, max_length=500, trim_whitespace=True)

    def validate_message(self, value):
        # una sola riga: il messaggio finisce in `git commit -m`
        return " ".join((value or "").split())
