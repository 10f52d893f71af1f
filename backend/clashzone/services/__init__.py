"""
Services Layer

Pure business logic services that:
- Accept domain inputs (IDs, sessions, team names, random sources)
- Return domain outputs (models, brackets, None for expected absences)
- Do NOT depend on HTTP request/response objects
- Only write the locked draw and recorded match results
"""
