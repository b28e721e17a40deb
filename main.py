from predictpro import create_app, socketio
from predictpro.utils.logger import setup_logger

app = create_app()
logger = setup_logger()

if __name__ == '__main__':
    logger.info("Starting PredictPro backend")
    socketio.run(app, host='0.0.0.0', port=5000, debug=app.config['DEBUG'], allow_unsafe_werkzeug=True)
