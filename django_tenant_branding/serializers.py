from rest_framework import serializers

from .branding import HeaderStyle, HomeTemplate
from .presentation import FONT_STACKS, RADIUS_TOKENS
from .validators import validate_hex_color


def _color():
    return serializers.CharField(required=False, validators=[validate_hex_color])


def _image():
    return serializers.CharField(required=False, allow_blank=True, max_length=2048)


class BrandingSerializer(serializers.Serializer):
    """Validates partial branding patches; every field is optional."""

    primary_color = _color()
    primary_dark_color = _color()
    accent_color = _color()
    accent_light_color = _color()
    company_name = serializers.CharField(required=False, max_length=200)
    font_family = serializers.ChoiceField(choices=sorted(FONT_STACKS), required=False)
    border_radius = serializers.ChoiceField(choices=list(RADIUS_TOKENS), required=False)
    header_style = serializers.ChoiceField(
        choices=[style.value for style in HeaderStyle], required=False
    )
    home_template_id = serializers.ChoiceField(
        choices=[template.value for template in HomeTemplate], required=False
    )
    hero_title = serializers.CharField(required=False, allow_blank=True, max_length=300)
    hero_subtitle = serializers.CharField(required=False, allow_blank=True, max_length=500)
    logo_url = _image()
    favicon_url = _image()
    hero_image_url = _image()
    products_banner = _image()
    services_banner = _image()
    news_banner = _image()
    about_banner = _image()
    login_banner_url = _image()

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one branding field is required.")
        return attrs


class ThemePresetSerializer(serializers.Serializer):
    key = serializers.CharField()
    name = serializers.CharField()
    primary = serializers.CharField()
    primary_dark = serializers.CharField()
    accent = serializers.CharField()
    accent_light = serializers.CharField()
    font = serializers.CharField()
    radius = serializers.CharField()
