"""
Response policy: outbound action types, keyword rules, and the pure
functions that map classified events to actions.
"""
