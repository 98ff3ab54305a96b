"""
Routers module - API endpoint handlers organized by feature.

- webhook: POST /webhook, Twilio WhatsApp messages answered with TwiML
- intent: POST /intent, the same assistant over JSON
- system: GET /health and GET /test-api
"""
