# Middleware package init
"""
Orders API — Middleware
========================

Request → [Request ID] → [Access Log] → [GZip] → [CORS] → router

Request ID runs first so that every log line written further down the chain,
including the access log, carries the same correlation ID.
"""
