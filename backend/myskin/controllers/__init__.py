# Controllers package initialization
# Each module exposes one blueprint; main.create_app() registers them all.
