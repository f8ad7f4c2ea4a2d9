from django.contrib import admin

from .models import Member, Team


class MemberInline(admin.TabularInline):
    model = Member
    extra = 0


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "key", "created_at")
    search_fields = ("name", "key")
    inlines = [MemberInline]
