"""
Team Registration API - Flask service

Responsibilities:
- In-memory team registration (CRUD, pagination, division filter)
- Signed pass-through to Exposure Events (events, divisions, teams)
- Stripe checkout sessions for registration fees
- Google Sheets mirror and confirmation emails for new registrations
"""
