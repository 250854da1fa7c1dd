"""Admin configuration for the integrations app."""
from django import forms
from django.contrib import admin

from integrations.models import Integration
from integrations.vault import VaultError, mask_secret


class IntegrationForm(forms.ModelForm):
    secret = forms.CharField(
        label="Nouvelle valeur",
        widget=forms.PasswordInput(render_value=False),
        required=False,
        help_text="Laissez vide pour conserver la valeur actuelle.",
    )

    class Meta:
        model = Integration
        fields = ("provider", "key", "is_enabled")

    def clean(self):
        cleaned = super().clean()
        if not self.instance.value and not cleaned.get("secret"):
            raise forms.ValidationError("Une valeur est requise.")
        return cleaned

    def save(self, commit=True):
        integration = super().save(commit=False)
        if self.cleaned_data.get("secret"):
            integration.set_secret(self.cleaned_data["secret"])
        if commit:
            integration.save()
        return integration


@admin.register(Integration)
class IntegrationAdmin(admin.ModelAdmin):
    form = IntegrationForm
    list_display = ("provider", "key", "preview", "is_enabled", "updated_at")
    list_filter = ("provider", "is_enabled")

    @admin.display(description="Apercu")
    def preview(self, obj):
        try:
            return mask_secret(obj.get_secret())
        except VaultError:
            return "Corrompu"
