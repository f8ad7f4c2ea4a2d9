from django.contrib import admin

from .models import (
    CollectionProduct,
    ComponentIdentifier,
    ProductComponent,
    ProductIdentifier,
    ReleaseComponent,
    TeaCollection,
    TeaComponent,
    TeaProduct,
    TeaRelease,
)


class ProductIdentifierInline(admin.TabularInline):
    model = ProductIdentifier
    extra = 0


class ComponentIdentifierInline(admin.TabularInline):
    model = ComponentIdentifier
    extra = 0


class ProductComponentInline(admin.TabularInline):
    model = ProductComponent
    extra = 0
    raw_id_fields = ("component",)


@admin.register(TeaProduct)
class TeaProductAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "version", "team", "created_at")
    list_filter = ("type",)
    search_fields = ("name", "uuid", "barcode", "sku")
    inlines = [ProductIdentifierInline, ProductComponentInline]


@admin.register(TeaComponent)
class TeaComponentAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "version", "team", "created_at")
    list_filter = ("type",)
    search_fields = ("name", "uuid")
    inlines = [ComponentIdentifierInline]


@admin.register(TeaRelease)
class TeaReleaseAdmin(admin.ModelAdmin):
    list_display = ("tag", "version", "product", "prerelease", "draft", "release_date")
    search_fields = ("tag", "version", "uuid")
    raw_id_fields = ("product",)


@admin.register(TeaCollection)
class TeaCollectionAdmin(admin.ModelAdmin):
    list_display = ("name", "team", "created_at", "updated_at")
    search_fields = ("name", "uuid")
    readonly_fields = ("lifecycle", "update_reason", "artifacts")


admin.site.register(ReleaseComponent)
admin.site.register(CollectionProduct)
