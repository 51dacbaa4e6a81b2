from django.contrib import admin

from .models import Complaint, ComplaintComment, ComplaintStatusChange


class ComplaintCommentInline(admin.TabularInline):
    model = ComplaintComment
    extra = 0
    readonly_fields = ("author", "text", "created_at")


class ComplaintStatusChangeInline(admin.TabularInline):
    model = ComplaintStatusChange
    extra = 0
    readonly_fields = ("status", "changed_by", "changed_at", "notes")


@admin.register(Complaint)
class ComplaintAdmin(admin.ModelAdmin):
    list_display = ("human_id", "title", "category", "department",
                    "status", "priority", "assigned_to", "created_at")
    list_filter = ("status", "category", "department", "priority")
    search_fields = ("human_id", "title", "description")
    readonly_fields = ("human_id", "department", "version")
    inlines = [ComplaintCommentInline, ComplaintStatusChangeInline]
