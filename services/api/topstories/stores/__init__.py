"""Data stores for persistence and caching.

Redis is the sole durable owner of stories, stats and the top-stories
pointer; in-process components rehydrate everything per request.

No business/filtering logic in stores - that belongs in services.
"""
