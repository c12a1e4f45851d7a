from latex_renderer import create_app

app = create_app()

if __name__ == '__main__':
    # Development configuration
    app.config.update(TEMPLATES_AUTO_RELOAD=True)
    app.run(debug=True, port=5001)
