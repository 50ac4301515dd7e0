#Boundary collaborator: consumes one selected estimate, produces a booking action.

from .redirector import BookingAction, Handoff, Redirector

__all__ = [
    "BookingAction",
    "Handoff",
    "Redirector",
]
