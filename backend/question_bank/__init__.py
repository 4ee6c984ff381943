"""Question Bank API - bilingual question bank and topic CRUD over a relational store."""
