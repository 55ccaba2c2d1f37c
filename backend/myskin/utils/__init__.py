# Utility helpers shared by services and controllers
