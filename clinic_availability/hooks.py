app_name = "clinic_availability"
app_title = "Clinic Availability"
app_publisher = "Sebastian Ortiz Valencia"
app_description = "Horarios de clinica y rooms, excepciones por fecha y generacion de slots reservables"
app_email = "sebastianortiz989@gmail.com"
app_license = "mit"

# Apps
# ------------------

# required_apps = []

# Includes in <head>
# ------------------

# include js, css files in header of desk.html
# app_include_js = "/assets/clinic_availability/js/clinic_availability.js"

# Installation
# ------------

# after_install = "clinic_availability.install.after_install"

# Document Events
# ---------------
# La cita solo se guarda si cae dentro del horario de la clinica/room

doc_events = {
	"Clinic Appointment": {
		"validate": "clinic_availability.clinic_availability.scheduling.validation.validate_appointment_availability"
	}
}

# Testing
# -------

# before_tests = "clinic_availability.install.before_tests"

# Automatically update python controller files with type annotations for this app.
# export_python_type_annotations = True
