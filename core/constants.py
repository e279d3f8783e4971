# core/constants.py

# --- Activity Verbs (Standard Registry) ---

# Competition participation
ACTIVITY_COMPETITION_ENTERED = "competition.entered"

# Join requests
ACTIVITY_JOIN_REQUESTED = "join_request.requested"
ACTIVITY_JOIN_INVITED = "join_request.invited"
ACTIVITY_JOIN_ACCEPTED = "join_request.accepted"
ACTIVITY_JOIN_CANCELED = "join_request.canceled"
