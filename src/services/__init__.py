"""Business logic services used by handlers.

Services are imported lazily by handlers so a cold start only pays for boto3
when the SLA policy table is actually configured.
"""

# Do NOT import services here - use lazy loading in handlers instead
