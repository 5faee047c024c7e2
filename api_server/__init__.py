"""API server - FastAPI application for AI persona debates"""
