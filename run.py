# run.py
import logging
from flask.cli import with_appcontext
from pawpal import create_app, db
from pawpal.config import Config

logging.basicConfig(level=getattr(logging, Config.LOG_LEVEL.upper(), logging.INFO),
                    format='%(asctime)s %(levelname)s %(name)s: %(message)s')

app = create_app()


@app.cli.command('init-db')
@with_appcontext
def init_db():
    db.create_all()
    print('Database initialized.')


if __name__ == '__main__':
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=app.config['PORT'])
