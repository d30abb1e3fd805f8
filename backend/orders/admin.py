from django.contrib import admin
from .models import Order, OrderItem, OrderItemCustomization


class OrderItemCustomizationInline(admin.TabularInline):
    model = OrderItemCustomization
    extra = 0
    readonly_fields = ("type", "name", "price_delta")
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("menu_item", "quantity", "unit_price", "get_line_item_total")
    fields = ("menu_item", "quantity", "unit_price", "get_line_item_total")
    can_delete = False

    def get_line_item_total(self, obj):
        return f"${obj.total_price:,.2f}"

    get_line_item_total.short_description = "Line Item Total"

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin configuration for the Order model.

    Orders are changed through the API so that status rules, numbering and
    kitchen notifications stay consistent; the admin is read-mostly.
    """

    list_display = (
        "order_number",
        "customer_name",
        "status",
        "payment_method",
        "order_type",
        "total",
        "created_at",
    )
    list_display_links = ("order_number",)
    search_fields = ("order_number", "customer_name", "customer__email")
    list_filter = ("status", "payment_method", "order_type", "created_at")
    readonly_fields = (
        "id",
        "order_number",
        "status",
        "subtotal",
        "surcharge",
        "total",
        "payment_reference",
        "terminal_checkout_reference",
        "created_at",
        "updated_at",
        "completed_at",
    )
    inlines = [OrderItemInline]


@admin.register(OrderItem)
class OrderItemAdmin(admin.ModelAdmin):
    list_display = ("order", "menu_item", "quantity", "unit_price")
    readonly_fields = ("order", "menu_item", "quantity", "unit_price")
    inlines = [OrderItemCustomizationInline]
