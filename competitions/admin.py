from django.contrib import admin
from .models import Competition, Team, Participant, JoinRequest, JoinMessage, TeamMessage


class ParticipantInline(admin.TabularInline):
    model = Participant
    extra = 0
    fields = ('user', 'joined_at')
    readonly_fields = ('joined_at',)


@admin.register(Competition)
class CompetitionAdmin(admin.ModelAdmin):
    list_display = ('name', 'location_category', 'access', 'start_date', 'end_date', 'total_prize_value', 'created_at')
    list_filter = ('location_category', 'access')
    search_fields = ('name', 'description')


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ('__str__', 'competition', 'current_size', 'created_at')
    list_filter = ('competition',)
    search_fields = ('name',)
    inlines = [ParticipantInline]


@admin.register(Participant)
class ParticipantAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'competition', 'joined_at')
    list_filter = ('competition',)
    search_fields = ('user__username', 'team__name')
    readonly_fields = ('competition',)


@admin.register(JoinRequest)
class JoinRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'team', 'team_consent', 'user_consent', 'created_at')
    list_filter = ('team_consent', 'user_consent')
    search_fields = ('user__username', 'team__name')


@admin.register(JoinMessage)
class JoinMessageAdmin(admin.ModelAdmin):
    list_display = ('join_request', 'sender', 'created_at')
    search_fields = ('message', 'sender__username')


@admin.register(TeamMessage)
class TeamMessageAdmin(admin.ModelAdmin):
    list_display = ('team', 'sender', 'created_at')
    search_fields = ('message', 'sender__username')
