"""
Default WhatsApp message templates and template variable vocabularies.

Templates stored in the whatsapp_templates table take precedence; these
constants are used when a template type has not been configured yet.
"""

# Template types as stored in whatsapp_templates.template_type
TEMPLATE_CONFIRMATION = "agendamento_cliente"
TEMPLATE_CANCELLATION = "cancelamento_cliente"
TEMPLATE_REMINDER = "lembrete_cliente"
TEMPLATE_NEW_BOOKING = "novo_agendamento"

# Canonical variable names (English vocabulary)
VAR_CLIENT_NAME = "clientName"
VAR_CLIENT_PHONE = "clientPhone"
VAR_APPOINTMENT_DATE = "appointmentDate"
VAR_APPOINTMENT_TIME = "appointmentTime"
VAR_PROCEDURE_NAME = "procedureName"
VAR_NOTES = "notes"
VAR_CITY_NAME = "cityName"
VAR_CLINIC_NAME = "clinicName"
VAR_CLINIC_ADDRESS = "clinicAddress"
VAR_CLINIC_MAP_URL = "clinicMapUrl"
VAR_CLINIC_LOCATION = "clinicLocation"
VAR_LOCATION_BLOCK = "locationBlock"
VAR_SPECIFICATIONS = "specifications"

# Portuguese vocabulary -> canonical vocabulary.
# Templates written by the clinic staff may use either side.
TEMPLATE_VARIABLE_SYNONYMS = {
    "nomeCliente": VAR_CLIENT_NAME,
    "telefoneCliente": VAR_CLIENT_PHONE,
    "dataAgendamento": VAR_APPOINTMENT_DATE,
    "horarioAgendamento": VAR_APPOINTMENT_TIME,
    "procedimento": VAR_PROCEDURE_NAME,
    "observacoes": VAR_NOTES,
    "cidade": VAR_CITY_NAME,
    "nomeClinica": VAR_CLINIC_NAME,
    "enderecoClinica": VAR_CLINIC_ADDRESS,
    "mapaClinica": VAR_CLINIC_MAP_URL,
    "localClinica": VAR_CLINIC_LOCATION,
    "blocoLocalizacao": VAR_LOCATION_BLOCK,
    "especificacoes": VAR_SPECIFICATIONS,
}

# Fallback texts: (heading, intro, outro) per template type
FALLBACK_MESSAGE_PARTS = {
    TEMPLATE_CONFIRMATION: (
        "✅ *Agendamento Confirmado*",
        "Seu agendamento foi confirmado:",
        "Aguardamos você!",
    ),
    TEMPLATE_CANCELLATION: (
        "❌ *Agendamento Cancelado*",
        "Informamos que seu agendamento foi cancelado:",
        "Para reagendar, entre em contato conosco.",
    ),
    TEMPLATE_REMINDER: (
        "⏰ *Lembrete de Agendamento*",
        "Lembramos que você tem um agendamento amanhã:",
        "Em caso de imprevisto, avise-nos com antecedência.",
    ),
    TEMPLATE_NEW_BOOKING: (
        "📅 *Novo Agendamento*",
        "Recebemos sua solicitação de agendamento:",
        "Em breve entraremos em contato para confirmar.",
    ),
}
