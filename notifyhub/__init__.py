"""Multi-channel notification dispatch service.

Notifications are persisted per tenant and delivered through in-app realtime
events, email, SMS and browser push according to each user's preferences.
"""
