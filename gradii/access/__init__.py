"""
Candidate access: OTP verification, Redis sessions, rate limiting and email.
"""
