"""Users app package.

Defines the custom user model with owner and borrower roles. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout
the project; the availability core only ever reads user ids from it.
"""
