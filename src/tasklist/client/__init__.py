"""
Client side of the /tasks resource.

- api.py: async httpx transport (TaskApiClient, TaskApiError)
- store.py: cached task list + actions (TaskClientStore, ActionResult)
"""
