import logging
import os
from dotenv import load_dotenv
load_dotenv()
from flask import Flask
from flask_cors import CORS
from flask_migrate import Migrate
from config import config_dict
from models import db
from routes.students import student_bp
from routes.tutors import tutor_bp
from routes.super_tutors import super_tutor_bp

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

migrate = Migrate()


def create_app(config_name=None):
    env = (config_name or os.environ.get("FLASK_ENV", "production")).lower()

    app = Flask(__name__)
    app.config.from_object(config_dict.get(env, config_dict["production"]))

    logging.basicConfig(level=app.config["LOG_LEVEL"], format=LOG_FORMAT)
    app.logger.setLevel(app.config["LOG_LEVEL"])
    app.logger.info("Environment: %s", env)

    CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"], "supports_credentials": True}})

    db.init_app(app)
    migrate.init_app(app, db)

    @app.route('/')
    def home():
        return "Welcome to the Quiz Platform!"

    app.register_blueprint(student_bp, url_prefix='/api/student')
    app.register_blueprint(tutor_bp, url_prefix='/api/tutor')
    app.register_blueprint(super_tutor_bp, url_prefix='/api/super-tutor')

    return app


app = create_app()

if __name__ == '__main__':
    app.run(debug=app.config['DEBUG'])
