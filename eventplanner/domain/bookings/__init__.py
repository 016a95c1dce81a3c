"""
Bookings Domain

A customer asks a provider to serve an event; the provider accepts,
rejects, cancels or completes it through the transition table in
state_machine.py.
"""
