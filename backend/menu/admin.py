from django.contrib import admin
from .models import CustomizationTemplate, MenuItem


class CustomizationTemplateInline(admin.TabularInline):
    model = CustomizationTemplate
    extra = 0


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ("name", "category", "price", "available", "updated_at")
    list_filter = ("available", "category")
    search_fields = ("name", "description")
    inlines = [CustomizationTemplateInline]
