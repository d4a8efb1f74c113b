"""Horses app package.

Horse listings are owned by lenders. The availability core reads only a
horse's id, owner and active flag; listing detail lives alongside for the
admin and the browse endpoints.
"""
