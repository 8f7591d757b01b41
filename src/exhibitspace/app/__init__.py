"""
The APP layer owns the event-driven state (navigation, selection, timers).
It talks to the MODEL only through the ViewpointProvider protocol.
"""
