"""REST API for the safari booking engine.

Exposes availability, calendar selection and cancellation operations over
HTTP. The app is served by uvicorn locally and by Mangum on AWS Lambda.
"""
