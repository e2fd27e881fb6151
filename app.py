import asyncio
import os
import tempfile

import streamlit as st

from scorm_kit.config_js import NAV_POSITIONS, RuntimeConfig
from scorm_kit.converter import OFFICE_EXTENSIONS, ensure_pdf
from scorm_kit.errors import ConversionError, ScormKitError
from scorm_kit.packager import PackageAssembler
from scorm_kit.progress_store import MemoryStore
from scorm_kit.viewer import ViewerSession

# Налаштування сторінки
st.set_page_config(
    page_title="SCORM-KIT",
    page_icon="📚",
    layout="wide"
)

UPLOAD_TYPES = ['pdf'] + [ext[1:] for ext in OFFICE_EXTENSIONS]


def run(coro):
    return asyncio.run(coro)


# Збирання пакету з завантаженого файлу або URL
def build_package(source_file, source_url, config, scorm_version):
    assembler = PackageAssembler(scorm_version=scorm_version)
    with tempfile.TemporaryDirectory() as temp_dir:
        if source_file is not None:
            file_path = os.path.join(temp_dir, os.path.basename(source_file.name))
            with open(file_path, "wb") as f:
                f.write(source_file.getbuffer())
            pdf_source = ensure_pdf(file_path, temp_dir)
        else:
            pdf_source = source_url

        output_path = os.path.join(temp_dir, "scorm_package.zip")
        staged = assembler.build_to_file(pdf_source, config, output_path)
        with open(output_path, "rb") as f:
            return f.read(), staged


def package_tab():
    st.markdown("Завантажте PDF або офісний документ чи вкажіть URL PDF-файлу.")

    with st.expander("Налаштування плеєра", expanded=True):
        col1, col2 = st.columns(2)
        with col1:
            title = st.text_input("Назва курсу (опціонально):", "")
            scorm_version = st.selectbox("Версія SCORM:", ("1.2", "2004"), index=0)
            nav_position = st.selectbox("Кнопки навігації:", NAV_POSITIONS, index=NAV_POSITIONS.index('right'))
        with col2:
            sidebar_open = st.checkbox("Бічна панель відкрита", value=True)
            sequence_locked = st.checkbox("Лише послідовний перегляд", value=True)

    uploaded_file = st.file_uploader("Документ", type=UPLOAD_TYPES)
    source_url = st.text_input("або URL PDF-файлу:", "")

    if not st.button("Створити SCORM-пакет"):
        return
    if uploaded_file is None and not source_url.strip():
        st.error("Завантажте файл або вкажіть URL")
        return

    progress_bar = st.progress(0)
    status_text = st.empty()
    status_text.text("Підготовка пакету...")
    progress_bar.progress(20)

    try:
        config = RuntimeConfig(
            title=title,
            sidebar_default_open=sidebar_open,
            slide_sequence_locked=sequence_locked,
            nav_position=nav_position,
        )
        data, staged = build_package(uploaded_file, source_url.strip(), config, scorm_version)
    except ConversionError as e:
        progress_bar.progress(100)
        st.error(f"Помилка конвертації: {e}")
        if e.stderr:
            st.code(e.stderr)
        return
    except ScormKitError as e:
        progress_bar.progress(100)
        st.error(f"Помилка під час створення пакету: {e}")
        return

    progress_bar.progress(100)
    status_text.text("Пакет створено!")
    st.download_button(
        "Завантажити SCORM-пакет",
        data=data,
        file_name="scorm_package.zip",
        mime="application/zip",
    )
    st.info(f"""
    📚 **SCORM-пакет створено!**

    - Назва: {staged.title}
    - Версія SCORM: {scorm_version}
    - Файлів у пакеті: {len(staged.resources) + 1}
    - Розмір: {round(len(data) / (1024 * 1024), 2)} МБ
    """)


def get_session():
    if "viewer" not in st.session_state:
        # прогрес зберігається в session_state замість LMS
        progress = st.session_state.setdefault("viewer_progress", {})
        st.session_state.viewer = ViewerSession(store_locator=lambda: MemoryStore(progress))
    return st.session_state.viewer


def viewer_tab():
    session = get_session()

    pdf_url = st.text_input("URL або шлях до PDF:", session.last_loaded_url or "")
    width = st.slider("Ширина області перегляду, px", 320, 1920, session.viewport_size[0], step=40)
    height = st.slider("Висота області перегляду, px", 240, 1440, session.viewport_size[1], step=40)

    col_load, col_prev, col_next = st.columns(3)
    try:
        if col_load.button("Відкрити"):
            run(session.start(pdf_url))
        if col_prev.button("← Назад"):
            run(session.prev())
        if col_next.button("Далі →"):
            run(session.next())
        if (width, height) != session.viewport_size:
            run(session.resize(width, height))
    except ScormKitError as e:
        st.error(f"Не вдалося відкрити PDF: {e}")

    state = session.get_state()
    if not state['pdf_loaded']:
        if session.surface.message:
            st.warning(session.surface.message)
        return

    st.progress(state['progress'], text=f"Сторінка {state['current_page']} / {state['total_pages']}")
    image = session.surface.to_png()
    if image is not None:
        st.image(image)
    elif session.surface.message:
        st.warning(session.surface.message)


# Головний інтерфейс
def main():
    st.title("SCORM-KIT")
    tab_package, tab_viewer = st.tabs(["SCORM-пакет", "Перегляд PDF"])
    with tab_package:
        package_tab()
    with tab_viewer:
        viewer_tab()


if __name__ == "__main__":
    main()
