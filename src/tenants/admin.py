"""Admin configuration for the tenants app."""
from django.contrib import admin

from tenants.models import Site, Tenant


class SiteInline(admin.TabularInline):
    model = Site
    extra = 0
    fields = ("name", "latitude", "longitude", "radius", "is_active")


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    """Admin for the Tenant model."""

    list_display = (
        "name",
        "industry",
        "plan",
        "work_start_time",
        "max_work_hours",
        "timezone",
        "is_active",
    )
    list_filter = ("industry", "plan", "is_active")
    search_fields = ("name",)
    readonly_fields = ("id", "created_at", "updated_at", "effective_vocabulary", "effective_config")
    inlines = (SiteInline,)

    fieldsets = (
        (None, {
            "fields": (
                "id",
                "name",
                "industry",
                "country",
                "plan",
                "is_active",
            ),
        }),
        ("Horaires", {
            "fields": (
                "work_start_time",
                "max_work_hours",
                "timezone",
            ),
        }),
        ("Personnalisation", {
            "fields": (
                "vocabulary",
                "effective_vocabulary",
                "config",
                "effective_config",
            ),
        }),
        ("Geolocalisation", {
            "fields": (
                "default_latitude",
                "default_longitude",
            ),
        }),
        ("Dates", {
            "fields": (
                "created_at",
                "updated_at",
            ),
        }),
    )


@admin.register(Site)
class SiteAdmin(admin.ModelAdmin):
    list_display = ("name", "tenant", "latitude", "longitude", "radius", "is_active")
    list_filter = ("is_active", "tenant")
    search_fields = ("name", "address")
    list_select_related = ("tenant",)
