# ===== Streamlit front-end: stock picker + indicator chat =====
import os

import streamlit as st

from analyst_chat import AnalystChat, filter_stocks, load_indicator_csv

INDICATOR_CSV = os.environ.get('INDICATOR_CSV', 'nifty50_data.csv')

st.set_page_config(page_title='Nifty 50 Stock Analysis', layout='wide')


@st.cache_data
def _load_stocks(path):
    return load_indicator_csv(path)


def _open_chat(stock):
    st.session_state['selected'] = stock
    st.session_state['chat_error'] = None
    try:
        chat = AnalystChat(stock)
        chat.start()
        st.session_state['chat'] = chat
    except Exception as e:
        st.session_state['chat'] = None
        st.session_state['chat_error'] = str(e)


def _go_back():
    st.session_state['selected'] = None
    st.session_state['chat'] = None
    st.session_state['chat_error'] = None


try:
    stocks = _load_stocks(INDICATOR_CSV)
except FileNotFoundError:
    stocks = []
    st.error(f'Indicator CSV not found: {INDICATOR_CSV}')

selected = st.session_state.get('selected')
chat = st.session_state.get('chat')

if st.session_state.get('chat_error'):
    st.header('Something went wrong!')
    st.write('Please try again later or select a different stock.')
    st.caption(st.session_state['chat_error'])
    st.button('Go Back', on_click=_go_back)

elif not selected:
    st.title('Nifty 50 Stock Analysis')
    search = st.text_input('Search stock symbol...', value='')
    matches = filter_stocks(stocks, search)
    cols = st.columns(5)
    for i, stock in enumerate(matches):
        cols[i % 5].button(stock['symbol'], key=f"pick_{stock['symbol']}",
                           on_click=_open_chat, args=(stock,), use_container_width=True)

else:
    st.subheader(f"Chat about {selected['symbol']}")
    st.button('Back to stocks', on_click=_go_back)

    for msg in chat.transcript if chat else []:
        with st.chat_message(msg['role']):
            st.markdown(msg['content'])

    question = st.chat_input('Ask a question...')
    if question and chat:
        with st.spinner('Loading...'):
            try:
                chat.send(question)
            except Exception as e:
                st.session_state['chat_error'] = str(e)
        st.rerun()
