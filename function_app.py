import azure.functions as func

from mediashelf_recommendation_service.blueprints import recommendations_blueprint

app = func.FunctionApp()

app.register_blueprint(recommendations_blueprint)
