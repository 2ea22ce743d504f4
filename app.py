"""
CoursePath - Sequential video course platform

Streamlit application for students to follow enrolled courses lesson by
lesson, and for administrators to curate the catalog.

Usage:
    streamlit run app.py
"""

import logging
from typing import Optional

import streamlit as st

from coursepath.admin import (
    CompanyManager,
    CourseManager,
    EnrollmentManager,
    LessonManager,
    MaterialManager,
    ModuleManager,
    UserDirectory,
)
from coursepath.auth import OAUTH_FLOW_PARAM, AuthService, OAuthFlowRegistry, resolve_redirect_url
from coursepath.classroom import (
    ClassroomLoader,
    CourseSession,
    LessonAvailability,
    ProgressTracker,
)
from coursepath.config import create_store, load_settings, setup_logging
from coursepath.errors import CoursePathError
from coursepath.viewer import (
    get_viewer_css,
    render_course_card,
    render_lesson_description,
    render_lesson_header,
    render_materials,
    render_video_embed,
)


# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------

SETTINGS = load_settings()
setup_logging(SETTINGS.log_level)
logger = logging.getLogger("coursepath.app")

st.set_page_config(
    page_title="CoursePath",
    page_icon="🎓",
    layout="wide",
    initial_sidebar_state="expanded",
)


@st.cache_resource
def get_oauth_flows() -> OAuthFlowRegistry:
    """OAuth flows in progress, shared by every session of this process."""
    return OAuthFlowRegistry()


def show_error(action: str, exc: Exception):
    """Log a failed action and tell the user; state stays as it was."""
    logger.error(f"{action} failed: {exc}")
    st.error(f"{action} failed: {exc}")


# -----------------------------------------------------------------------------
# Session State Initialization
# -----------------------------------------------------------------------------

def init_session_state():
    """Initialize session state variables."""
    if "store" not in st.session_state:
        st.session_state.store = create_store(SETTINGS) if SETTINGS.is_configured else None

    store = st.session_state.store
    if store is None:
        return

    if "auth" not in st.session_state:
        st.session_state.auth = AuthService(
            store,
            resolve_redirect_url(SETTINGS.redirect_url),
            flows=get_oauth_flows(),
        )

    if "loader" not in st.session_state:
        st.session_state.loader = ClassroomLoader(store, max_workers=SETTINGS.fetch_workers)

    if "tracker" not in st.session_state:
        st.session_state.tracker = ProgressTracker(store)

    if "identity" not in st.session_state and "code" in st.query_params:
        complete_oauth_redirect()

    if "identity" not in st.session_state:
        try:
            st.session_state.identity = st.session_state.auth.current_user()
        except CoursePathError as exc:
            logger.error(f"Error getting session: {exc}")
            st.session_state.identity = None

    if "profile" not in st.session_state:
        identity = st.session_state.identity
        try:
            st.session_state.profile = (
                st.session_state.auth.ensure_user_profile(identity) if identity else None
            )
        except CoursePathError as exc:
            logger.error(f"Error loading profile: {exc}")
            st.session_state.identity = None
            st.session_state.profile = None

    if "selected_course_id" not in st.session_state:
        st.session_state.selected_course_id = None

    if "course_session" not in st.session_state:
        st.session_state.course_session = None


def complete_oauth_redirect():
    """Exchange the code on the OAuth redirect URL for a session."""
    code = st.query_params["code"]
    flow_id = st.query_params.get(OAUTH_FLOW_PARAM)
    st.query_params.clear()
    try:
        st.session_state.auth.complete_oauth_sign_in(code, flow_id)
    except CoursePathError as exc:
        logger.error(f"OAuth sign in failed: {exc}")
        st.session_state.login_error = f"Google sign in failed: {exc}"


def reset_user_state():
    for key in ("identity", "profile", "selected_course_id", "course_session"):
        st.session_state.pop(key, None)


# -----------------------------------------------------------------------------
# Login
# -----------------------------------------------------------------------------

def render_login():
    """Render sign-in and sign-up forms."""
    auth = st.session_state.auth

    st.title("🎓 CoursePath")
    login_error = st.session_state.pop("login_error", None)
    if login_error:
        st.error(login_error)

    tab_sign_in, tab_sign_up = st.tabs(["Sign in", "Create account"])

    with tab_sign_in:
        with st.form("sign_in"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", type="primary", use_container_width=True)
        if submitted:
            try:
                auth.sign_in(email, password)
                reset_user_state()
                st.rerun()
            except CoursePathError as exc:
                show_error("Sign in", exc)

        try:
            google_url = auth.google_sign_in_url()
        except CoursePathError as exc:
            logger.warning(f"Google sign in unavailable: {exc}")
            google_url = None
        if google_url:
            st.link_button("Continue with Google", google_url, use_container_width=True)

    with tab_sign_up:
        with st.form("sign_up"):
            full_name = st.text_input("Full name")
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input("Password", type="password", key="sign_up_password")
            submitted = st.form_submit_button("Create account", type="primary", use_container_width=True)
        if submitted:
            try:
                identity = auth.sign_up(email, password, full_name)
                if identity is None:
                    st.info("Check your email to confirm your account.")
                else:
                    reset_user_state()
                    st.rerun()
            except CoursePathError as exc:
                show_error("Sign up", exc)


def render_sign_out():
    if st.sidebar.button("Sign out", use_container_width=True):
        try:
            st.session_state.auth.sign_out()
        except CoursePathError as exc:
            logger.error(f"Error signing out: {exc}")
        reset_user_state()
        st.rerun()


# -----------------------------------------------------------------------------
# Student: Course List
# -----------------------------------------------------------------------------

def render_course_list():
    """Render the enrolled courses of the signed-in student."""
    st.title("My Courses")

    try:
        cards = st.session_state.loader.get_enrolled_courses(st.session_state.identity.id)
    except CoursePathError as exc:
        show_error("Loading courses", exc)
        return

    if not cards:
        st.info("No courses available. Contact an administrator to get access.")
        return

    st.markdown(get_viewer_css(), unsafe_allow_html=True)
    columns = st.columns(3)
    for idx, card in enumerate(cards):
        with columns[idx % 3]:
            st.markdown(render_course_card(card.course, card.company), unsafe_allow_html=True)
            if st.button("Continue watching", key=f"course_{card.course.id}", use_container_width=True):
                open_course(card.course.id)


def open_course(course_id: str):
    session = CourseSession(
        course_id,
        st.session_state.identity.id,
        st.session_state.loader,
        st.session_state.tracker,
    )
    try:
        session.load()
    except CoursePathError as exc:
        show_error("Loading course", exc)
        return
    st.session_state.selected_course_id = course_id
    st.session_state.course_session = session
    st.rerun()


def close_course():
    st.session_state.selected_course_id = None
    st.session_state.course_session = None
    st.rerun()


# -----------------------------------------------------------------------------
# Student: Lesson Viewer
# -----------------------------------------------------------------------------

def render_course_tree(session: CourseSession):
    """Render the sidebar tree with lesson navigation."""
    nav = session.navigator
    stats = nav.get_progress_summary()

    st.sidebar.markdown(
        f"**Progress:** {stats['completed']}/{stats['total_lessons']} lessons ({stats['completion_percent']}%)"
    )
    st.sidebar.progress(stats["completion_percent"] / 100)
    st.sidebar.divider()
    st.sidebar.subheader("Course Content")

    for nav_module in nav.get_navigation_tree():
        module_progress = f"({nav_module.completed_count}/{nav_module.total_count})"
        expanded = any(nav_lesson.is_current for nav_lesson in nav_module.lessons)
        with st.sidebar.expander(
            f"MODULE {nav_module.number} · **{nav_module.module.title}** {module_progress}",
            expanded=expanded,
        ):
            for nav_lesson in nav_module.lessons:
                lesson = nav_lesson.lesson
                indicator = nav.get_status_indicator(lesson.id)
                title = lesson.title[:30] + "..." if len(lesson.title) > 30 else lesson.title
                if st.button(
                    f"{indicator} {title}",
                    key=f"lesson_{lesson.id}",
                    disabled=nav_lesson.availability == LessonAvailability.LOCKED,
                    help=f"Lesson {nav_lesson.position} of {nav.total_lessons}",
                    use_container_width=True,
                ):
                    select_lesson(session, lesson.id)


def select_lesson(session: CourseSession, lesson_id: str):
    try:
        if not session.select_lesson(lesson_id):
            st.warning("Complete the previous lessons to unlock this one.")
            return
    except CoursePathError as exc:
        show_error("Opening lesson", exc)
        return
    st.rerun()


def render_lesson_view(session: CourseSession):
    """Render the current lesson."""
    if st.button("← Back to courses"):
        close_course()

    lesson = session.current_lesson
    if lesson is None:
        st.info("This course has no lessons yet.")
        return

    nav = session.navigator
    st.markdown(get_viewer_css(), unsafe_allow_html=True)
    st.markdown(render_video_embed(lesson), unsafe_allow_html=True)
    st.markdown(render_lesson_header(lesson, nav.get_lesson_label(lesson.id)), unsafe_allow_html=True)

    refresh_warning = st.session_state.pop("refresh_warning", None)
    if refresh_warning:
        st.warning(refresh_warning)

    render_completion_section(session)

    description = render_lesson_description(lesson)
    if description:
        st.subheader("Description")
        st.markdown(description, unsafe_allow_html=True)

    if session.materials:
        st.subheader("Materials")
        st.markdown(render_materials(session.materials), unsafe_allow_html=True)

    render_navigation_bar(session)


def render_navigation_bar(session: CourseSession):
    """Render navigation bar with prev/next buttons."""
    nav = session.navigator
    lesson_id = session.current_lesson_id
    pos, total = nav.get_lesson_position(lesson_id)

    prev_id = nav.get_previous_lesson_id(lesson_id)
    next_id = nav.get_next_lesson_id(lesson_id)

    st.divider()
    col1, col2, col3 = st.columns([1, 2, 1])

    with col1:
        if prev_id and nav.is_lesson_available(prev_id):
            if st.button("← Previous", use_container_width=True):
                select_lesson(session, prev_id)

    with col2:
        st.markdown(f"<center>Lesson {pos} of {total}</center>", unsafe_allow_html=True)

    with col3:
        if next_id and nav.is_lesson_available(next_id):
            if st.button("Next →", use_container_width=True):
                select_lesson(session, next_id)


def render_completion_section(session: CourseSession):
    """Render lesson completion button."""
    completed = session.navigator.is_lesson_completed(session.current_lesson_id)

    if st.button(
        "Lesson completed ✓" if completed else "Mark lesson as complete",
        type="primary",
        disabled=completed,
        use_container_width=True,
    ):
        try:
            session.complete_current_lesson()
        except CoursePathError as exc:
            show_error("Completing lesson", exc)
            return
        if session.refresh_error is not None:
            # Completion is saved; the old tree stays until a reload succeeds
            st.session_state.refresh_warning = (
                f"Progress saved, but the course could not be refreshed: {session.refresh_error}"
            )
        else:
            next_id = session.navigator.get_next_lesson_id(session.current_lesson_id)
            if next_id:
                try:
                    session.select_lesson(next_id)
                except CoursePathError as exc:
                    show_error("Opening lesson", exc)
                    return
        st.rerun()


def render_student_dashboard():
    session = st.session_state.course_session
    if session is None:
        render_course_list()
        return
    render_course_tree(session)
    render_lesson_view(session)


# -----------------------------------------------------------------------------
# Admin Dashboard
# -----------------------------------------------------------------------------

def option_index(options: list, value) -> Optional[int]:
    return options.index(value) if value in options else None


def render_companies_tab(store):
    companies = CompanyManager(store)

    with st.form("company_form", clear_on_submit=True):
        st.markdown("**New company**")
        name = st.text_input("Name")
        logo_url = st.text_input("Logo URL")
        if st.form_submit_button("Save"):
            try:
                companies.create(name=name, logo_url=logo_url)
                st.rerun()
            except CoursePathError as exc:
                show_error("Saving company", exc)

    for company in companies.list():
        with st.expander(f"**{company.name}**"):
            with st.form(f"edit_company_{company.id}"):
                name = st.text_input("Name", value=company.name)
                logo_url = st.text_input("Logo URL", value=company.logo_url or "")
                if st.form_submit_button("Save changes"):
                    try:
                        companies.update(company.id, name=name, logo_url=logo_url)
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Updating company", exc)

            if st.button("Delete company", key=f"delete_company_{company.id}"):
                try:
                    companies.delete(company.id)
                    st.rerun()
                except CoursePathError as exc:
                    show_error("Deleting company", exc)


def render_courses_tab(store):
    courses = CourseManager(store)
    company_list = CompanyManager(store).list()
    company_names = {company.id: company.name for company in company_list}
    # "" stands for a course without a company
    company_ids = [""] + list(company_names)

    with st.form("course_form", clear_on_submit=True):
        st.markdown("**New course**")
        title = st.text_input("Title")
        description = st.text_area("Description")
        company_id = st.selectbox(
            "Company",
            options=company_ids,
            format_func=lambda cid: company_names.get(cid, "No company"),
        )
        is_active = st.checkbox("Active", value=True)
        if st.form_submit_button("Save"):
            try:
                courses.create(title=title, description=description, company_id=company_id, is_active=is_active)
                st.rerun()
            except CoursePathError as exc:
                show_error("Saving course", exc)

    for course in courses.list():
        status = "Active" if course.is_active else "Inactive"
        with st.expander(f"**{course.title}** · {company_names.get(course.company_id, '-')} · {status}"):
            with st.form(f"edit_course_{course.id}"):
                title = st.text_input("Title", value=course.title)
                description = st.text_area("Description", value=course.description or "")
                company_id = st.selectbox(
                    "Company",
                    options=company_ids,
                    format_func=lambda cid: company_names.get(cid, "No company"),
                    index=option_index(company_ids, course.company_id or ""),
                )
                is_active = st.checkbox("Active", value=course.is_active)
                if st.form_submit_button("Save changes"):
                    try:
                        courses.update(
                            course.id,
                            title=title,
                            description=description,
                            company_id=company_id,
                            is_active=is_active,
                        )
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Updating course", exc)

            if st.button("Delete course", key=f"delete_course_{course.id}"):
                try:
                    courses.delete(course.id)
                    st.rerun()
                except CoursePathError as exc:
                    show_error("Deleting course", exc)


def render_modules_tab(store):
    modules = ModuleManager(store)
    course_names = {course.id: course.title for course in CourseManager(store).list_active()}

    with st.form("module_form", clear_on_submit=True):
        st.markdown("**New module**")
        title = st.text_input("Title")
        description = st.text_area("Description")
        course_id = st.selectbox(
            "Course",
            options=list(course_names),
            format_func=lambda cid: course_names[cid],
            index=None,
        )
        order_index = st.number_input("Order", min_value=0, step=1)
        if st.form_submit_button("Save"):
            try:
                modules.create(title=title, description=description, course_id=course_id, order_index=order_index)
                st.rerun()
            except CoursePathError as exc:
                show_error("Saving module", exc)

    for module in modules.list():
        with st.expander(f"{module.order_index}. **{module.title}** · {course_names.get(module.course_id, '-')}"):
            with st.form(f"edit_module_{module.id}"):
                title = st.text_input("Title", value=module.title)
                description = st.text_area("Description", value=module.description or "")
                order_index = st.number_input("Order", min_value=0, step=1, value=module.order_index)
                if st.form_submit_button("Save changes"):
                    try:
                        modules.update(module.id, title=title, description=description, order_index=order_index)
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Updating module", exc)

            if st.button("Delete module", key=f"delete_module_{module.id}"):
                try:
                    modules.delete(module.id)
                    st.rerun()
                except CoursePathError as exc:
                    show_error("Deleting module", exc)


def render_lessons_tab(store):
    lessons = LessonManager(store)
    materials = MaterialManager(store)
    module_names = {module.id: module.title for module in ModuleManager(store).list()}

    with st.form("lesson_form", clear_on_submit=True):
        st.markdown("**New lesson**")
        title = st.text_input("Title")
        description = st.text_area("Description")
        video_url = st.text_input("Video URL")
        module_id = st.selectbox(
            "Module",
            options=list(module_names),
            format_func=lambda mid: module_names[mid],
            index=None,
        )
        order_index = st.number_input("Order", min_value=0, step=1)
        duration_seconds = st.number_input("Duration (seconds)", min_value=0, step=1)
        if st.form_submit_button("Save"):
            try:
                lessons.create(
                    title=title,
                    description=description,
                    video_url=video_url,
                    module_id=module_id,
                    order_index=order_index,
                    duration_seconds=duration_seconds,
                )
                st.rerun()
            except CoursePathError as exc:
                show_error("Saving lesson", exc)

    for lesson in lessons.list():
        with st.expander(f"{lesson.order_index}. {lesson.title} · {module_names.get(lesson.module_id, '-')}"):
            # Editing keeps the lesson id, so progress on it survives a reorder
            with st.form(f"edit_lesson_{lesson.id}"):
                title = st.text_input("Title", value=lesson.title)
                description = st.text_area("Description", value=lesson.description or "")
                video_url = st.text_input("Video URL", value=lesson.video_url)
                order_index = st.number_input("Order", min_value=0, step=1, value=lesson.order_index)
                duration_seconds = st.number_input(
                    "Duration (seconds)", min_value=0, step=1, value=lesson.duration_seconds or 0
                )
                if st.form_submit_button("Save changes"):
                    try:
                        lessons.update(
                            lesson.id,
                            title=title,
                            description=description,
                            video_url=video_url,
                            order_index=order_index,
                            duration_seconds=duration_seconds,
                        )
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Updating lesson", exc)

            st.markdown("**Materials**")
            for material in materials.list_for_lesson(lesson.id):
                col1, col2 = st.columns([5, 1])
                col1.markdown(f"[{material.title}]({material.file_url}) · {material.file_type.upper()}")
                if col2.button("Remove", key=f"delete_material_{material.id}"):
                    try:
                        materials.delete(material.id)
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Deleting material", exc)

            with st.form(f"material_form_{lesson.id}", clear_on_submit=True):
                material_title = st.text_input("Material title")
                file_url = st.text_input("File URL")
                file_type = st.text_input("File type", placeholder="pdf")
                if st.form_submit_button("Add material"):
                    try:
                        materials.create(
                            lesson_id=lesson.id,
                            title=material_title,
                            file_url=file_url,
                            file_type=file_type,
                        )
                        st.rerun()
                    except CoursePathError as exc:
                        show_error("Adding material", exc)

            if st.button("Delete lesson", key=f"delete_lesson_{lesson.id}"):
                try:
                    lessons.delete(lesson.id)
                    st.rerun()
                except CoursePathError as exc:
                    show_error("Deleting lesson", exc)


def render_enrollments_tab(store):
    enrollments = EnrollmentManager(store)
    users = {profile.id: profile for profile in UserDirectory(store).list()}
    course_names = {course.id: course.title for course in CourseManager(store).list_active()}

    with st.form("enrollment_form"):
        st.markdown("**New enrollment**")
        user_id = st.selectbox(
            "User",
            options=list(users),
            format_func=lambda uid: (users[uid].full_name or "Unnamed") + (" (Admin)" if users[uid].is_admin else ""),
            index=None,
        )
        course_id = st.selectbox(
            "Course",
            options=list(course_names),
            format_func=lambda cid: course_names[cid],
            index=None,
        )
        if st.form_submit_button("Enroll"):
            try:
                enrollments.enroll(user_id, course_id)
                st.rerun()
            except CoursePathError as exc:
                show_error("Enrolling user", exc)

    for enrollment in enrollments.list():
        profile = users.get(enrollment.user_id)
        col1, col2 = st.columns([5, 1])
        enrolled = enrollment.enrolled_at.strftime("%Y-%m-%d") if enrollment.enrolled_at else "-"
        col1.markdown(
            f"**{profile.full_name if profile and profile.full_name else 'Unnamed user'}** · "
            f"{course_names.get(enrollment.course_id, 'Course not found')} · enrolled {enrolled}"
        )
        if col2.button("Remove", key=f"delete_enrollment_{enrollment.id}"):
            try:
                enrollments.delete(enrollment.id)
                st.rerun()
            except CoursePathError as exc:
                show_error("Removing enrollment", exc)


def render_admin_dashboard():
    store = st.session_state.store
    st.title("Administration")

    tabs = st.tabs(["Companies", "Courses", "Modules", "Lessons", "Enrollments"])
    renderers = [
        render_companies_tab,
        render_courses_tab,
        render_modules_tab,
        render_lessons_tab,
        render_enrollments_tab,
    ]
    for tab, render in zip(tabs, renderers):
        with tab:
            try:
                render(store)
            except CoursePathError as exc:
                show_error("Loading", exc)


# -----------------------------------------------------------------------------
# Main App
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    init_session_state()

    if st.session_state.store is None:
        st.error("Supabase is not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY in .env.")
        return

    if st.session_state.identity is None:
        render_login()
        return

    st.sidebar.title("🎓 CoursePath")
    profile = st.session_state.profile
    st.sidebar.caption(profile.full_name or st.session_state.identity.email or "")
    render_sign_out()

    if profile.is_admin:
        render_admin_dashboard()
    else:
        render_student_dashboard()


if __name__ == "__main__":
    main()
