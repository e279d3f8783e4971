from django.contrib import admin
from .models import DomainActivity

@admin.register(DomainActivity)
class DomainActivityAdmin(admin.ModelAdmin):
    list_display = ('verb', 'actor', 'competition', 'object_id', 'timestamp')
    list_filter = ('verb', 'timestamp')
    search_fields = ('actor__username', 'verb')
    readonly_fields = ('actor', 'verb', 'content_type', 'object_id', 'competition', 'metadata', 'timestamp')
