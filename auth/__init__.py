"""
auth — User authentication module.

Provides:
  • Signed bearer token creation & verification
  • Password hashing (bcrypt)
  • Register / Login API routes
  • ``get_current_user`` FastAPI dependency
"""
