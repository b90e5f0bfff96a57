"""Twilio state machine engine.

Handlers and callbacks are registered per state in ``twism.machine``; session
parameters survive between webhook requests in the signed cookie from
``twism.cookie``.
"""
