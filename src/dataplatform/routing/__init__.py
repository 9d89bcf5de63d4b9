"""Routing: ordered route table with first-match-wins dispatch.

Routes are registered during setup, frozen when the app starts serving,
and scanned in registration order for every request.
"""
