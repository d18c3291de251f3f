from tango_crm.core.application import create_application

# Entry point for uvicorn: `uvicorn tango_crm.main:app --reload`
app = create_application()
