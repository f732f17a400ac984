"""HTTP request capture and replay.

This module records selected requests issued through a requests session
into a durable JSON store and replays them later in order.
"""
