"""Notifications app package.

Subscribes to borrow request events and records an in-app notification
for the counter-party. Delivery to the external messaging and push
pipeline happens in a Celery task; its failure never affects the
transition that raised the event.
"""
