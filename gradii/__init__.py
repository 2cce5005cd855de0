"""Gradii Interview Service.

This package contains the candidate-facing interview backend used by Gradii:
candidates receive an interview link, prove ownership of their email address
with a one-time passcode, and then take an MCQ, coding, behavioral or combo
interview that is scored answer by answer.

High-level architecture
-----------------------

- ``gradii.interview``:

  - Question models and parsing of stored question sets.
  - Per-answer scoring for MCQ, coding and behavioral questions.
  - ``UnifiedInterviewService``: the linear interview flow
    (initialize -> submit_answer* -> complete) with Redis-backed flow state.
  - LLM-assisted overall analysis with a rule-based fallback.

- ``gradii.access``:

  - OTP issuing and verification for candidate access.
  - Redis interview sessions bound to an httpOnly cookie.
  - Redis sliding-window rate limiting and OTP email delivery.

- ``gradii.integrations``:

  - Redis connection factory and the Piston code execution client.

- ``gradii.core``:

  - Logging, monitoring, error types, persistence entities and repositories.

- ``gradii.server``:

  - The FastAPI application and its routers.

Typical workflow
----------------

1. An admin creates an interview (direct or through a job campaign).
2. The candidate requests an OTP for their email and verifies it.
3. The verified session initializes the interview flow.
4. Answers are submitted strictly in question order.
5. Completion aggregates the scores, stores the result and analysis.
"""
