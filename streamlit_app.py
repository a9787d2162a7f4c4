"""
Realments playground.
Builds a demo form with the FormBuilder, renders it with the FormRenderer and
lets you drive submissions, flashed errors and per-field UI state.
"""

import asyncio
import logging
import secrets
from urllib.parse import parse_qsl

import streamlit as st
import streamlit.components.v1 as components

from realments.builder import FormBuilder
from realments.config_loader import configure_logging, get_config, get_config_problems, get_config_value
from realments.editor_loader import EditorLoader
from realments.field_state import FieldStateStore
from realments.form_data_collector import parse_query_string, submitted_method
from realments.i18n import Translator
from realments.renderer import FormRenderer
from realments.session import SessionStore
from realments.validation import validate_payload


# Configure logging dynamically from config
try:
    configure_logging()
    logger = logging.getLogger(__name__)
except Exception as e:
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger(__name__)
    logger.error(f"Failed to configure logging from config: {e}, using INFO level")

page_title = get_config_value('ui', 'page_title', 'Realments Playground')

st.set_page_config(
    page_title=page_title,
    page_icon="🧩",
    layout="wide",
    initial_sidebar_state="expanded"
)

DEMO_FORM_ID = "demo_form"
CSS_FRAMEWORKS = ['bootstrap', 'tailwind', 'bulma']
THEME_MODES = ['light', 'dark']

FRAMEWORK_STYLESHEETS = {
    'bootstrap': '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.0/dist/css/bootstrap.min.css">',
    'tailwind': '<script src="https://cdn.tailwindcss.com"></script>',
    'bulma': '<link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bulma@0.9.4/css/bulma.min.css">',
}


def main():
    """Main application entry point."""
    from realments.error_handler import ErrorHandler, ErrorType

    try:
        init_session_state()
        render_header()
        render_sidebar()
        render_main_content()
    except Exception as e:
        ErrorHandler.handle_error(
            e,
            "playground startup",
            ErrorType.SYSTEM,
            actions=ErrorHandler.recovery_actions("config")
        )


def init_session_state():
    """Initialize session state variables."""
    if 'css_framework' not in st.session_state:
        st.session_state.css_framework = get_config_value('forms', 'default_css_framework', 'bootstrap')

    if 'theme_mode' not in st.session_state:
        st.session_state.theme_mode = get_config_value('forms', 'default_theme_mode', 'light')

    if 'locale' not in st.session_state:
        st.session_state.locale = get_config_value('i18n', 'default_locale', 'en')

    if 'csrf_token' not in st.session_state:
        st.session_state.csrf_token = secrets.token_hex(16)

    if 'custom_payload' not in st.session_state:
        st.session_state.custom_payload = None

    if 'last_submission' not in st.session_state:
        st.session_state.last_submission = None


def render_header():
    """Render application header."""
    app_name = get_config_value('app', 'name', 'Realments')
    st.title(f"🧩 {app_name} Playground")
    st.markdown("**Declarative forms with a JSON wire payload** | "
                f"Framework: **{st.session_state.css_framework}** | "
                f"Theme: **{st.session_state.theme_mode}** | "
                f"Locale: **{st.session_state.locale}**")

    for problem in get_config_problems(get_config()):
        st.warning(f"⚙️ {problem}")


def render_sidebar():
    """Render form settings and the payload paste box."""
    from realments.error_handler import SafeOperations

    with st.sidebar:
        st.header(get_config_value('ui', 'sidebar_title', 'Form Settings'))

        st.session_state.css_framework = st.selectbox(
            "CSS Framework:",
            options=CSS_FRAMEWORKS,
            index=CSS_FRAMEWORKS.index(st.session_state.css_framework)
            if st.session_state.css_framework in CSS_FRAMEWORKS else 0
        )
        st.session_state.theme_mode = st.radio(
            "Theme:",
            options=THEME_MODES,
            index=THEME_MODES.index(st.session_state.theme_mode)
            if st.session_state.theme_mode in THEME_MODES else 0,
            horizontal=True
        )

        locales = get_config_value('i18n', 'available_locales', ['en']) or ['en']
        st.session_state.locale = st.selectbox(
            "Locale:",
            options=locales,
            index=locales.index(st.session_state.locale) if st.session_state.locale in locales else 0
        )

        st.divider()

        st.header("Custom Payload")
        pasted = st.text_area("Paste a wire payload (JSON):", height=200)

        col1, col2 = st.columns(2)
        with col1:
            if st.button("▶️ Render", help="Render the pasted payload instead of the demo form"):
                payload = SafeOperations.safe_json_payload(pasted)
                if payload is not None:
                    st.session_state.custom_payload = payload
                    st.rerun()
        with col2:
            if st.button("📋 Demo Form", help="Go back to the built-in demo form"):
                st.session_state.custom_payload = None
                st.rerun()

        st.divider()

        if st.button("🔄 Reset Field State", help="Forget per-field UI state and flashed input"):
            session = SessionStore()
            session.clear_field_state()
            session.pull_errors()
            session.pull_old_input()
            st.rerun()


def build_demo_form(css_framework: str, theme_mode: str) -> FormBuilder:
    """Build a form that exercises every field type."""
    form = FormBuilder(css_framework, theme_mode)
    form.open({'id': DEMO_FORM_ID, 'action': '/register', 'method': 'POST'})

    form.text('Full Name', None, {'placeholder': 'Jane Doe'}).rules('required|min:3')
    form.email('Email').rules('required|email')
    form.password('Password').rules('required|min:8|confirmed')
    form.password('Password Confirmation', {'label': 'Confirm Password'})
    form.number('Age').rules('integer|min:18|max:120')
    form.text('Website', None, {'add_more': True, 'add_more_max': 3})

    form.date('Birth Date').rules('date')
    form.time('Preferred Time')
    form.datetime('Appointment')
    form.daterange('Stay Period', ['2023-07-01', '2023-07-10'])

    form.select('Country', {0: 'Pick one', 'id': 'Indonesia', 'sg': 'Singapore', 'my': 'Malaysia'}).rules('required')
    form.select('Languages', {0: 'Select languages', 'en': 'English', 'id': 'Bahasa Indonesia'},
                {'add_button': True, 'max_additions': 2, 'button_text': 'Add language'})
    form.radio('Plan', {'basic': 'Basic', 'pro': 'Pro', 'team': 'Team'}, 'basic')
    form.checkbox('Interests', None, False, {'options': {'music': 'Music', 'sport': 'Sport', 'travel': 'Travel'}})
    form.checkbox('Accept Terms', '1', False, {'label': 'I accept the terms'}).rules('required')
    form.switch('Newsletter', '1', True)

    form.autocomplete('City', ['Jakarta', 'Bandung', 'Surabaya', 'Singapore', 'Kuala Lumpur'])
    form.tags('Skills', 'python,streamlit', {'suggestions': ['pydantic', 'yaml', 'pytest'], 'max_tags': 5})
    form.range('Experience', 3, {'min': 0, 'max': 10})
    form.color('Favorite Color', '#3366ff')

    form.textarea('Bio', None, {'rows': 3}).rules('max:500')
    form.richtext('Cover Letter', None, {'editor': 'quill'})
    form.file('Avatar', None, {'thumbnail': True, 'thumbnail_size': 80})
    form.captcha('Captcha').rules('required')
    form.hidden('Referrer', 'playground')

    form.close(get_config_value('forms', 'default_submit_text', 'Submit'))
    return form


async def prepare_editors(renderer: FormRenderer, payload):
    """Load the editors a payload needs, cancelling anything left pending."""
    try:
        return await renderer.prepare(payload)
    finally:
        await renderer.aclose()


def render_main_content():
    """Render the preview, payload and state controls."""
    from realments.error_handler import ErrorHandler, ErrorType

    session = SessionStore()
    translator = Translator(st.session_state.locale)

    if st.session_state.custom_payload is not None:
        payload = dict(st.session_state.custom_payload)
        payload.setdefault('errors', session.pull_errors())
        payload.setdefault('oldInput', session.pull_old_input())
        form_id = str(payload.get('formId') or 'custom_form')
    else:
        form = build_demo_form(st.session_state.css_framework, st.session_state.theme_mode)
        payload = form.render(session)
        form_id = form.form_id

    state_store = FieldStateStore(session.field_state_bucket(form_id))
    renderer = FormRenderer(
        translator=translator,
        editor_loader=EditorLoader(),
        state_store=state_store,
        csrf_token=st.session_state.csrf_token
    )

    editors = ErrorHandler.with_error_handling(
        lambda: asyncio.run(prepare_editors(renderer, payload)),
        context="loading editors",
        error_type=ErrorType.EDITOR,
        default_return={}
    )
    for editor, asset in (editors or {}).items():
        if asset is None:
            st.caption(f"📝 {editor} editor unavailable; plain text area shown")

    preview_tab, payload_tab, state_tab = st.tabs(["👁️ Preview", "📦 Payload", "🎛️ Field State"])

    with preview_tab:
        markup = ErrorHandler.with_error_handling(
            lambda: renderer.render_html(payload),
            context="rendering payload",
            error_type=ErrorType.RENDER,
            actions=ErrorHandler.recovery_actions("payload")
        )
        if markup is not None:
            stylesheet = FRAMEWORK_STYLESHEETS.get(st.session_state.css_framework, '')
            components.html(f"{stylesheet}{markup}", height=900, scrolling=True)

        render_submission(payload, translator, session)

    with payload_tab:
        st.json(payload)
        with st.expander("Mount markup"):
            st.code(str(renderer.mount_markup(payload)), language="html")

    with state_tab:
        render_state_controls(state_store)


def render_submission(payload, translator: Translator, session: SessionStore):
    """Simulate a browser submission from an urlencoded body."""
    st.subheader("📨 Simulated Submission")
    body = st.text_input(
        "Request body (urlencoded):",
        value="full-name=Jo&email=not-an-email&country=&skills[]=python",
        help="Bracketed names such as skills[] and stay-period[0] are collected into lists"
    )

    if st.button("Submit", type="primary"):
        data = parse_query_string(body)
        method = submitted_method(parse_qsl(body))
        errors = validate_payload(payload, data, translator)
        logger.info(f"Simulated {method} submission with {len(data)} field(s), {len(errors)} error(s)")

        if errors:
            session.flash_errors(errors)
            session.flash_input(data)
            st.session_state.last_submission = None
        else:
            st.session_state.last_submission = data
        st.rerun()

    if st.session_state.last_submission is not None:
        st.success("✅ Submission passed the advisory validation")
        st.json(st.session_state.last_submission)


def render_state_controls(state_store: FieldStateStore):
    """Drive per-field UI state the way browser events would."""
    if len(state_store) == 0:
        st.info("Render the form first to create field state.")
        return

    tags = state_store.peek(FieldStateStore.key('tags', 'skills'))
    if tags is not None:
        st.markdown("**Skills (tags)**")
        col1, col2 = st.columns([3, 1])
        with col1:
            text = st.text_input("New tag:", key="tag_text")
        with col2:
            if st.button("⏎ Enter", key="tag_enter"):
                tags.input_text = text
                if not tags.key_down('Enter'):
                    st.warning("Tag not added (empty, duplicate or limit reached)")
                st.rerun()
        st.write(", ".join(tags.tags) or "No tags")

    password = state_store.peek(FieldStateStore.key('password', 'password'))
    if password is not None:
        if st.button("👁️ Toggle password visibility", key="password_toggle"):
            password.toggle()
            st.rerun()

    languages = state_store.peek(FieldStateStore.key('select', 'languages'))
    if languages is not None:
        col1, col2 = st.columns(2)
        with col1:
            if st.button("➕ Add language group", key="select_add", disabled=not languages.can_add):
                languages.add_group()
                st.rerun()
        with col2:
            if st.button("➖ Remove last group", key="select_remove", disabled=not languages.added_items):
                languages.remove_group(len(languages.added_items) - 1)
                st.rerun()

    city = state_store.peek(FieldStateStore.key('autocomplete', 'city'))
    if city is not None:
        st.markdown("**City (autocomplete)**")
        query = st.text_input("Type:", value=city.query, key="city_query")
        if query != city.query:
            city.type_text(query)
            st.rerun()
        cols = st.columns(4)
        for col, key in zip(cols, ['ArrowUp', 'ArrowDown', 'Enter', 'Escape']):
            with col:
                if st.button(key, key=f"city_{key}"):
                    city.key_down(key)
                    st.rerun()

    period = state_store.peek(FieldStateStore.key('daterange', 'stay-period'))
    if period is not None:
        start = st.text_input("Stay period start (YYYY-MM-DD):", value=period.start or '', key="period_start")
        if (start or None) != period.start:
            period.set_start(start)
            st.rerun()
        st.caption(f"End date min: {period.end_min or '-'} | Start date max: {period.start_max or '-'}")

    captcha = state_store.peek(FieldStateStore.key('captcha', 'captcha'))
    if captcha is not None:
        if st.button("🔁 Refresh CAPTCHA", key="captcha_refresh"):
            captcha.refresh()
            st.rerun()

    avatar = state_store.peek(FieldStateStore.key('file', 'avatar'))
    if avatar is not None:
        uploaded = st.file_uploader("Avatar:", type=['png', 'jpg', 'jpeg', 'gif'], key="avatar_upload")
        if uploaded is not None and uploaded.name != avatar.file_name:
            avatar.choose(uploaded.name, uploaded.getvalue(), uploaded.type)
            st.rerun()
        if avatar.file_name and st.button("🗑️ Clear avatar", key="avatar_clear"):
            avatar.clear()
            st.rerun()


if __name__ == "__main__":
    main()
