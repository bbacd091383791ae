"""
Flask host for the dispatcher: REST routes and Socket.IO stream delivery
"""
